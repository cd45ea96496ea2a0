"""Tokenizing source text and decoding literal excerpts."""