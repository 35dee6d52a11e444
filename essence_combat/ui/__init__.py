"""
Console user interface for the combat engine.
"""

from .console import (
    PlayerInterface,
    describe_encounter,
    health_bar,
    print_encounter,
    render_log,
    status_table,
)
