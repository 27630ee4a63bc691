"""framecompose — frame-indexed animation and timeline composition.

Resolve a declarative timeline of scenes and transitions into exact
frame ranges, then compute the state of any single frame (active
scenes, transition blend, keyframe and spring values, typed text,
audio gain) as a pure function of its frame number.
"""
