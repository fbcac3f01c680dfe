# Services package.
#
# Each module exposes a focused set of async functions that encapsulate
# business logic and database access:
#
#   blog_service   list / create / update / delete for Blog, with
#                  ownership checks and the cached list view
#   user_service   registration and lookups for User
#   login_service  username/password exchange for a signed token
#
# All service functions accept an AsyncSession as their first argument
# so that the router layer controls the transaction boundary via the
# ``get_db`` dependency.
