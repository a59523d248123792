# Services package.
#
#   article_service  : creation, image attachment and title listings
#                      for the Article aggregate
#
# Services receive their collaborators (store adapter, image storage,
# identifier generator) through the constructor; ``app.dependencies``
# wires the production ones per request, so the router layer still owns
# the transaction boundary via ``get_db``.
