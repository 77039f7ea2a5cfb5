"""Face Attendance package.

Turns sightings from a face-recognition pipeline into a debounced attendance
log, with daily first-arrival roll, stats, CSV/JSON exports and a thin Flask
controller layer over a service/repository core.
"""
