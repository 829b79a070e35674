"""
Terrain Image Generator

Pick a map viewport and a render mode, send the bounding box to the image
service and show the image it returns.
"""
