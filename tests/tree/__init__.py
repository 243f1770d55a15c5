"""
Tests for the decision tree core.

Test organization:
- test_models.py: Data model tests (NodeType, DecisionNode, DecisionTree)
- test_constraints.py: Node-type adjacency and structural checks
- test_node_factory.py: Field coercion, range checks, forced fields, defaults
- test_propagation.py: Cumulative time, expected cost and probability flags
- test_serialization.py: JSON/YAML documents
"""
