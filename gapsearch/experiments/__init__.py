"""Experiment runners, result summaries, and plots"""
