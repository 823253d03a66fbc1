"""
The VIEW layer renders engine output. It only reads from the engine and
sends it commands.
"""
