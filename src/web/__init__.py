"""
Browser viewer for the corridor renderer.
"""
