"""
Soccer SQL Lab Interfaces

This package contains the command-line interface for:
- Building and inspecting the database
- Running the canned query catalog
- Training and evaluating the outcome classifiers
"""
