"""REST API for the camera rental admin booking calendar."""
