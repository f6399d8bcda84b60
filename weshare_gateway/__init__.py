"""
WeShare Gateway - REST access to the WeShare chaincode on a Fabric network.
"""
__version__ = "1.0.0"
