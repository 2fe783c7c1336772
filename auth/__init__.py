"""auth/ -- Credential store, token service and auth flows for the account service.

Layer rule: auth/ imports only stdlib + third-party libraries (plus core/ for
settings). It does NOT import from api/. api/ imports from auth/, not the other
way around.
"""
