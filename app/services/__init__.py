# Services package.
#
# Each module exposes a focused set of async functions that encapsulate
# business rules for a single domain entity:
#
#   user_service  - id assignment/preservation and email-uniqueness helpers
#                   for User, delegating persistence to user_repository
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the session lifetime via the
# ``get_db`` dependency.
