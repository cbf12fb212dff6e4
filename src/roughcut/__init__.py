"""roughcut — hand-drawn 2D animation timelines.

Scenes are async choreography routines that add, move and remove sketchy
shapes over time. A Stage renders any timestamp of a Timeline to a Pillow
image; the exporter records whole timelines to video. Timelines can also
be declared in YAML manifests and rendered from the command line.
"""

