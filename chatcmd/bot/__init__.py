"""
Discord transport and configuration.
"""
