"""Expression values, expression tree nodes and evaluation context."""