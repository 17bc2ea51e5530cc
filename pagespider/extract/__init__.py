"""Offline extraction of titles, links, publish times and site information from HTML."""