"""
ml-dispatch - client-side dispatch of inference requests to machine learning servers.
"""
__version__ = "1.0.0"
