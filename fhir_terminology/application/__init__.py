"""Application layer.

Ports that connect the terminology engine to resolvers and loggers
supplied by the host.
"""
