# -*- coding: utf-8 -*-
# Generated by the protocol buffer compiler.  DO NOT EDIT!
# source: earbug_gchat/protos/store.proto
# Protobuf Python Version: 4.25.1
"""Generated protocol buffer code."""
from google.protobuf import descriptor as _descriptor
from google.protobuf import descriptor_pool as _descriptor_pool
from google.protobuf import symbol_database as _symbol_database
from google.protobuf.internal import builder as _builder
# @@protoc_insertion_point(imports)

_sym_db = _symbol_database.Default()




DESCRIPTOR = _descriptor_pool.Default().AddSerializedFile(b'\x0a\x1fearbug_gchat/protos/store.proto\x12\x09earbug.v3"\x82\x01\x0a\x05Store\x122\x0a\x09playbacks\x18\x01 \x03(\x0b2\x1f.earbug.v3.Store.PlaybacksEntry\x1aE\x0a\x0ePlaybacksEntry\x12\x0b\x0a\x03key\x18\x01 \x01(\x09\x12"\x0a\x05value\x18\x02 \x01(\x0b2\x13.earbug.v3.Playback:\x028\x01"\x1c\x0a\x08Playback\x12\x10\x0a\x08track_id\x18\x01 \x01(\x09b\x06proto3')

_globals = globals()
_builder.BuildMessageAndEnumDescriptors(DESCRIPTOR, _globals)
_builder.BuildTopDescriptorsAndMessages(DESCRIPTOR, 'earbug_gchat.protos.store_pb2', _globals)
if _descriptor._USE_C_DESCRIPTORS == False:
  DESCRIPTOR._options = None
  _globals['_STORE_PLAYBACKSENTRY']._options = None
  _globals['_STORE_PLAYBACKSENTRY']._serialized_options = b'8\001'
  _globals['_STORE']._serialized_start=47
  _globals['_STORE']._serialized_end=177
  _globals['_STORE_PLAYBACKSENTRY']._serialized_start=108
  _globals['_STORE_PLAYBACKSENTRY']._serialized_end=177
  _globals['_PLAYBACK']._serialized_start=179
  _globals['_PLAYBACK']._serialized_end=207
# @@protoc_insertion_point(module_scope)
