from .crawler import *
