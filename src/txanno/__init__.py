"""
holds submodules related to annotating small variants against transcript models
"""
__version__ = '0.1.0'
