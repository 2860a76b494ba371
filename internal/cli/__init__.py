"""
Command line layer for Mapradar.

Key Components:
- MapradarCli: runs one parsed command against MapradarClient
- output: pretty JSON rendering and `Error:` lines for stderr
"""
