#!/usr/bin/env uv run
# /// script
# requires-python = ">=3.9"
# dependencies = [
#     "revalidator[httpx]",
# ]
#
# [tool.uv.sources]
# revalidator = { path = "../", editable = true }
# ///

import logging
import time

import httpx

from revalidator.httpx import build_conditional_httpx_request, entry_from_httpx_response

logging.basicConfig(level=logging.DEBUG)

with httpx.Client() as client:
    request = client.build_request("GET", "https://www.python.org/")

    sent_at = time.time()
    response = client.send(request)
    entry = entry_from_httpx_response(response, request_date=sent_at, response_date=time.time())

    revalidation = client.send(build_conditional_httpx_request(request, entry))
    print(revalidation.status_code, revalidation.request.headers)
