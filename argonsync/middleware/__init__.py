"""Readers and writers that turn script, text, CSV and MessagePack files into instance properties."""