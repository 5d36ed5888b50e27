"""
One Googol: a shared counter pushed up and down by everyone connected.
"""
__version__ = "0.1.0"
