"""
The Qt host: a QPainter canvas, QSoundEffect audio and the widget whose
frame timer drives a BootSession.
"""
