"""ghostrelay - Ghost webhook to deploy-trigger relay"""
__version__ = "0.1.0"
