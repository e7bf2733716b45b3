from .base import Storage
from .memory import MemoryStorage
from .sql import SQLStorage
from .seed import seed_sample_data
