"""Configuration, offer store, metrics and HTTP application for searching trade offers."""