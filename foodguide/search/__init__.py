"""
Restaurant search session package.

Responsibilities:
- Define the location, category and restaurant data model.
- Acquire the client position through a pluggable geolocation provider.
- Drive the locating / searching / success / error state machine.
- Render session state into a view model for the front end.
"""
