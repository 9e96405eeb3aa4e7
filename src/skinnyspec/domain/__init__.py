"""Pure naming and planning logic for the controller example DSL.

Nothing here touches pytest, mocks or the host framework: inflection rules,
the RESTful action table, example descriptions, marker values and DSL errors.
"""
