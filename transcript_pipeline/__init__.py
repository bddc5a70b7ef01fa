"""Core pipeline package for turning course subtitle files into transcripts.

The CLI in ``course_transcriber`` wires these modules together; each module is
usable on its own.
"""
