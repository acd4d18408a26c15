__version__ = "0.1.0"

USER_AGENT = f"NOTIFY-API-PYTHON-CLIENT/{__version__}"
