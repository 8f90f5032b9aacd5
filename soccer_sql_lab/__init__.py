"""
Soccer SQL Lab Package

An instructional pipeline over a fixed football-statistics dataset: load the
CSV extracts into a SQLite database, explore it with canned SQL, assemble a
games/team-stats feature table, and tune, compare and test two match outcome
classifiers (k-nearest neighbors and gradient-boosted trees).
"""

__version__ = "0.1.0"
