"""
Support MAS - customer-service multi-agent runtime with a self-simulation judge loop
"""

__version__ = "1.0.0"
