# topmark:header:start
#
#   project      : ReqPipe
#   file         : __init__.py
#   file_relpath : src/reqpipe/pipeline/__init__.py
#   license      : MIT
#   copyright    : (c) 2025 Olivier Biot
#
# topmark:header:end

"""ReqPipe processing pipeline package.

This package contains the components that implement the request/response
pipeline:

- The data model shared between steps (request, response, result)
- Request construction and step attachment
- The chain executor (a small state machine around one transport dispatch)
- Built-in step implementations and default pipeline assembly

The public entry points are [`reqpipe.pipeline.request`][reqpipe.pipeline.request]
for construction, [`reqpipe.pipeline.pipelines`][reqpipe.pipeline.pipelines] for
default assembly and [`reqpipe.pipeline.engine`][reqpipe.pipeline.engine] for
execution.
"""
