"""JSON web API for the disk scheduling simulator.

This package provides a Flask application that exposes a
``DiskSimulator`` to a browser front end.  It is an **optional** extra;
install with::

    pip install py-disksim[web]

The ``create_app`` factory in ``app.py`` wires workload editing,
playback control and the comparison views to HTTP endpoints.
"""
