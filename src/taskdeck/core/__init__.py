"""
Core wiring.

- ports.py: Protocols the components depend on (storage substrate, posts source)
- state.py: AppState, the bag of collaborators shared by the front end
"""
