"""
Readflow core package.

Turns reading material (web pages, EPUB archives, pasted or uploaded text)
into a stable word sequence. The ingestion subpackage normalizes sources
into plain text, the reading subpackage tokenizes and computes per-word
reading-aid spans, and the playback subpackage drives timed flash and
continuous scroll playback with speech output.
"""
