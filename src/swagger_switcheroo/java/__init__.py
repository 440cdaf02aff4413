"""
Java declaration tree, front end and source patcher.

- `nodes`: the declaration tree and its edit log.
- `frontend`: builds the tree from source with `javalang`.
- `builder`: constructors for new nodes.
- `patcher`: renders the edit log back to source text.
"""
