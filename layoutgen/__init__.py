"""layoutgen — grid facility-layout synthesis (CORELAP and CRAFT engines)."""
