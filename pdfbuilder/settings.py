# When set, unknown color names and text operations issued outside of a
# text object raise instead of being corrected silently.
STRICT = False
