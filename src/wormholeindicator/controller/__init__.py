"""
Background work that feeds the boot context: the alert poll runs on worker
threads and only ever talks to the frame loop through the context inbox.
"""
