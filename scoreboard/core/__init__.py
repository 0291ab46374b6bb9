"""
Core broadcast logic: shared state, hub, command processor, broadcaster
"""
