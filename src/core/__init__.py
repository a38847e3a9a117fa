"""
Chat core: attachment encoding, history mapping, streaming and the transcript.
"""
