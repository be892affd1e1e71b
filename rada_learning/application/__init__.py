"""
Application layer.

Use cases that turn learner events and content definitions into domain
operations. Repositories are reached through Protocol ports; every write
runs inside a Unit of Work so its effects commit together or not at all.
"""
