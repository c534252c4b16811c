"""Sources producing columnar batches from external data"""
