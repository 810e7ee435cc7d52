"""
Port interfaces (Protocols) for external collaborators.

- renderer: rendering engine surfaces
- storage: object storage
- ids: collision-resistant identifier generation
"""
