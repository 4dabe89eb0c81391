#!/usr/bin/env python3
"""
Fourbar Backend Server
Uses centralized port configuration from configs.appconfig
"""
from __future__ import annotations

import logging

import uvicorn

from configs.appconfig import BACKEND_PORT

if __name__ == '__main__':
    logging.basicConfig(level=logging.INFO, format='%(asctime)s %(name)s %(levelname)s: %(message)s')
    print(f'Starting Fourbar Backend Server on port {BACKEND_PORT}...')
    uvicorn.run('backend.query_api:app', host='0.0.0.0', port=BACKEND_PORT, reload=True)
