# Outbound (server -> client) message kinds
SEND_REGISTERED = "1001"  # {id, roomId, turns?}
SEND_ROOM_INFO = "1002"  # [{id, nickname}, ...]
SEND_JOINED = "1003"  # {id}
SEND_CANDIDATE = "1004"  # {targetId, candidate}
SEND_NEW_CONNECTION = "1005"  # {targetId, offer}
SEND_CONNECTED = "1006"  # {targetId, answer}
SEND_NICKNAME_UPDATED = "1007"  # {id, nickname}

# Inbound (client -> server) message kinds, carried in the envelope's `type`
RECV_CANDIDATE = "9001"  # data.candidate
RECV_NEW_CONNECTION = "9002"  # data.targetAddr (offer)
RECV_CONNECTED = "9003"  # data.targetAddr (answer)
RECV_UPDATE_NICKNAME = "9004"  # data.nickname
RECV_KEEPALIVE = "9999"
