"""
Json field mapping package.

Flattens arbitrary JSON objects into exact-match terms:
- tokens: pull-based token streams (ijson or decoded values)
- parser: depth-tracking leaf flattener
- emitter: root and keyed term emission with ignore_above / null_value
- field_type: query capabilities of a json field
- field_mapper: builder, mapping parser, per-document parse, merge
- registry: atomic swap-in of merged mappers
"""
