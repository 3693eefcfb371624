"""End-to-end tests of the ``datastash`` command-line interface."""
