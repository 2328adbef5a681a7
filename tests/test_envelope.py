"""Test envelope encryption."""

import unittest
import unittest.mock

import lazarus_vault.envelope
import lazarus_vault.exceptions

import tests.mockups


class TestEnvelopeCipher(unittest.TestCase):
    """Test encrypting and decrypting payloads."""

    def test_encrypt_decrypt_round_trip(self):
        """Test that decrypting the ciphertext gives back the plaintext."""
        for plaintext in (b"", b"a", b"Hello, Sentinel Protocol!", bytes(range(256)) * 300):
            ciphertext, key, nonce = lazarus_vault.envelope.encrypt(plaintext)
            self.assertEqual(
                lazarus_vault.envelope.decrypt(ciphertext, key, nonce), plaintext
            )

    def test_encrypt_output_shape(self):
        """Test ciphertext, key and nonce sizes."""
        plaintext = b"Hello, Sentinel Protocol!"
        ciphertext, key, nonce = lazarus_vault.envelope.encrypt(plaintext)

        self.assertNotEqual(ciphertext, plaintext)
        self.assertNotIn(plaintext, ciphertext)
        self.assertEqual(len(ciphertext), len(plaintext) + 16)
        self.assertEqual(len(key), 32)
        self.assertEqual(len(nonce), 12)

    def test_encrypt_uses_a_new_key_every_time(self):
        """Test that two encryptions of the same plaintext don't share material."""
        first = lazarus_vault.envelope.encrypt(b"same plaintext")
        second = lazarus_vault.envelope.encrypt(b"same plaintext")
        self.assertNotEqual(first[1], second[1])
        self.assertNotEqual(first[2], second[2])
        self.assertNotEqual(first[0], second[0])

    def test_encrypt_draws_key_then_nonce_from_random_source(self):
        """Test that the injected random source provides key and nonce."""
        source = unittest.mock.Mock(side_effect=[b"k" * 32, b"n" * 12])
        _, key, nonce = lazarus_vault.envelope.encrypt(b"test", source)

        self.assertEqual(key, b"k" * 32)
        self.assertEqual(nonce, b"n" * 12)
        source.assert_has_calls([unittest.mock.call(32), unittest.mock.call(12)])

    def test_encrypt_is_deterministic_with_fixed_source(self):
        """Test that a fixed random source gives reproducible ciphertext."""
        first = lazarus_vault.envelope.encrypt(
            b"test", tests.mockups.fixed_random_source()
        )
        second = lazarus_vault.envelope.encrypt(
            b"test", tests.mockups.fixed_random_source()
        )
        self.assertEqual(first, second)

    def test_encrypt_raises_with_bad_random_source(self):
        """Test that wrong sized random material fails cipher initialization."""
        with self.assertRaises(lazarus_vault.exceptions.CipherInitError):
            lazarus_vault.envelope.encrypt(b"test", lambda size: b"x" * (size - 1))

    def test_encrypt_raises_encryption_error_on_aead_failure(self):
        """Test that a failing AEAD call is reported as EncryptionError."""
        mock_cipher = unittest.mock.Mock(
            return_value=unittest.mock.Mock(
                **{"encrypt.side_effect": ValueError("fail")}
            )
        )
        with unittest.mock.patch("lazarus_vault.envelope.AESGCM", mock_cipher):
            with self.assertRaises(lazarus_vault.exceptions.EncryptionError):
                lazarus_vault.envelope.encrypt(b"test")

    def test_decrypt_known_aes_256_gcm_vectors(self):
        """Test decryption of the published AES-256-GCM test cases 13 and 14."""
        key = bytes(32)
        nonce = bytes(12)
        self.assertEqual(
            lazarus_vault.envelope.decrypt(
                bytes.fromhex("530f8afbc74536b9a963b4f1c4cb738b"), key, nonce
            ),
            b"",
        )
        self.assertEqual(
            lazarus_vault.envelope.decrypt(
                bytes.fromhex(
                    "cea7403d4d606b6e074ec5d3baf39d18"
                    "d0d1c8a799996bf0265b98b5d48ab919"
                ),
                key,
                nonce,
            ),
            bytes(16),
        )

    def test_encrypt_matches_aes_256_gcm_vector(self):
        """Test that encryption with fixed material gives the known ciphertext."""
        source = unittest.mock.Mock(side_effect=[bytes(32), bytes(12)])
        ciphertext, _, _ = lazarus_vault.envelope.encrypt(bytes(16), source)
        self.assertEqual(
            ciphertext.hex(),
            "cea7403d4d606b6e074ec5d3baf39d18d0d1c8a799996bf0265b98b5d48ab919",
        )

    def test_decrypt_with_encoded_key_material(self):
        """Test decrypting a blob with its hex encoded decryption key."""
        ciphertext = bytes.fromhex(
            "cea7403d4d606b6e074ec5d3baf39d18d0d1c8a799996bf0265b98b5d48ab919"
        )
        key, nonce = lazarus_vault.envelope.decode_key_material("00" * 44)
        self.assertEqual(
            lazarus_vault.envelope.decrypt(ciphertext, key, nonce), bytes(16)
        )

    def test_decrypt_detects_every_flipped_bit(self):
        """Test that flipping any bit in the ciphertext fails decryption."""
        ciphertext, key, nonce = lazarus_vault.envelope.encrypt(b"tamper me")
        for index in range(len(ciphertext)):
            for bit in range(8):
                tampered = bytearray(ciphertext)
                tampered[index] ^= 1 << bit
                with self.assertRaises(lazarus_vault.exceptions.DecryptionError):
                    lazarus_vault.envelope.decrypt(bytes(tampered), key, nonce)

    def test_decrypt_fails_with_wrong_key_or_nonce(self):
        """Test that decryption fails with the wrong key material."""
        ciphertext, key, nonce = lazarus_vault.envelope.encrypt(b"test")
        with self.assertRaises(lazarus_vault.exceptions.DecryptionError):
            lazarus_vault.envelope.decrypt(ciphertext, bytes(32), nonce)
        with self.assertRaises(lazarus_vault.exceptions.DecryptionError):
            lazarus_vault.envelope.decrypt(ciphertext, key, bytes(12))

    def test_decrypt_fails_with_truncated_ciphertext_or_bad_sizes(self):
        """Test that malformed input only raises DecryptionError."""
        ciphertext, key, nonce = lazarus_vault.envelope.encrypt(b"test")
        with self.assertRaises(lazarus_vault.exceptions.DecryptionError):
            lazarus_vault.envelope.decrypt(ciphertext[:10], key, nonce)
        with self.assertRaises(lazarus_vault.exceptions.DecryptionError):
            lazarus_vault.envelope.decrypt(ciphertext[:-1], key, nonce)
        with self.assertRaises(lazarus_vault.exceptions.DecryptionError):
            lazarus_vault.envelope.decrypt(ciphertext, key[:31], nonce)
        with self.assertRaises(lazarus_vault.exceptions.DecryptionError):
            lazarus_vault.envelope.decrypt(ciphertext, key, nonce + b"\x00")


class TestKeyMaterial(unittest.TestCase):
    """Test key material encoding."""

    def test_encode_key_material_length(self):
        """Test that encoded key material is 88 hex characters."""
        encoded = lazarus_vault.envelope.encode_key_material(bytes(32), b"\x01" * 12)
        self.assertEqual(len(encoded), 88)
        self.assertEqual(encoded, "00" * 32 + "01" * 12)

    def test_key_material_round_trip(self):
        """Test that decoding reverses encoding."""
        key = bytes([7]) * 32
        nonce = bytes([9]) * 12
        encoded = lazarus_vault.envelope.encode_key_material(key, nonce)
        self.assertEqual(
            lazarus_vault.envelope.decode_key_material(encoded), (key, nonce)
        )

    def test_decode_key_material_accepts_prefix_and_uppercase(self):
        """Test that a 0x prefix and uppercase hex are accepted."""
        key = bytes(range(32))
        nonce = bytes(range(100, 112))
        encoded = lazarus_vault.envelope.encode_key_material(key, nonce)
        self.assertEqual(
            lazarus_vault.envelope.decode_key_material("0x" + encoded.upper()),
            (key, nonce),
        )

    def test_decode_key_material_rejects_43_bytes(self):
        """Test that a key material string one byte short is rejected."""
        with self.assertRaises(lazarus_vault.exceptions.KeyFormatError):
            lazarus_vault.envelope.decode_key_material("ab" * 43)

    def test_decode_key_material_rejects_45_bytes(self):
        """Test that a key material string one byte long is rejected."""
        with self.assertRaises(lazarus_vault.exceptions.KeyFormatError):
            lazarus_vault.envelope.decode_key_material("ab" * 45)

    def test_decode_key_material_rejects_non_hex(self):
        """Test that non-hex input is rejected."""
        for value in ("zz" * 44, "a" * 87, "", "ab " * 44, "ä" * 88):
            with self.assertRaises(lazarus_vault.exceptions.KeyFormatError):
                lazarus_vault.envelope.decode_key_material(value)

    def test_encode_key_material_rejects_wrong_sizes(self):
        """Test that encoding validates key and nonce sizes."""
        with self.assertRaises(lazarus_vault.exceptions.KeyFormatError):
            lazarus_vault.envelope.encode_key_material(bytes(31), bytes(12))
        with self.assertRaises(lazarus_vault.exceptions.KeyFormatError):
            lazarus_vault.envelope.encode_key_material(bytes(32), bytes(13))

    def test_key_format_error_is_an_input_error(self):
        """Test the error taxonomy of key format errors."""
        with self.assertRaises(lazarus_vault.exceptions.InputError):
            lazarus_vault.envelope.decode_key_material("ab")
