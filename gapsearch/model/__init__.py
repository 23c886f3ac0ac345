"""Model components: GAP instance, solution representation, and instance generator"""

from .instance import Instance
from .solution import Solution
from .result import SearchResult
from .instance_generator import generate_instance, save_instance, load_instance, generate_instance_set

__all__ = ['Instance', 'Solution', 'SearchResult', 'generate_instance',
           'save_instance', 'load_instance', 'generate_instance_set']
