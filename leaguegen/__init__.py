"""
leaguegen: season/league-table generator for a fictional football universe.
Club strength modelling, match simulation, standings with tie-breaks and
promotion/relegation, plus a small SQLite entity store and HTTP API.
"""
__version__ = "0.1.0"
