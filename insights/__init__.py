"""
CRM Widget Insights - source package

Module layout:
    - config: centralized configuration
    - analysis: widget analysis pipeline
    - integrations: external service integrations
    - utils: logging and exceptions
"""
from . import utils
from . import config
from . import integrations
from . import analysis
