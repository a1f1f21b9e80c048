"""Run the Survey Pulse server with ``python -m survey_pulse``."""

from .main import main

main()
