"""
Keywords recognized by the dispatcher.

Both keywords are fixed; they are never part of a registered phrase
(negation) or are only legal inside a pattern when followed by a
validator (conjunction).
"""

# Leading prefix of the phrase argument that inverts an assertion
NEGATION_PREFIX = "not "

# Bare argument that chains independent assertions against one subject
CONJUNCTION = "and"

# Assertion id carried by explicit failures
FAIL = "FAIL"

# Argument positions checked (in order) when looking up the phrase
PHRASE_POSITIONS = (1, 0)
