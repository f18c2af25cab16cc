"""Version information for the WooCommerce API Python client"""

__version__ = "0.3.1"
