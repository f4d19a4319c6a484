# Repositories package.
#
# Data-access functions that translate entity operations into
# AsyncSession calls:
#
#   user_repository  - CRUD + lookup-by-email for User
#
# Unlike the service layer, repository functions own the commit: every
# mutating call is persisted before it returns.
