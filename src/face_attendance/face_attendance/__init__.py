"""Face attendance package.

Organized by feature modules (faces, matching, identities, attendance,
storage) with a thin Flask controller layer over service/repository layers.
"""
